from hdifinder.cli import main

main()
