from amalgamate.cli import main

main()
