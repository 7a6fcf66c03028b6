from presencekit.main import main

main()
