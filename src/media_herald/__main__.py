from media_herald.app import main

main()
