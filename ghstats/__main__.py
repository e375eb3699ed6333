from ghstats.cli import main

main(prog_name="ghstats")
