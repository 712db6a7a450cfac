from httpet.cli import main

main()
