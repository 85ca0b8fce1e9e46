from kncli.app import main

main()
