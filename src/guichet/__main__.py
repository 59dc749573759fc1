from guichet.main import main

main()
