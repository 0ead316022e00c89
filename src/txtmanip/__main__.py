from txtmanip.cli import main

main()
