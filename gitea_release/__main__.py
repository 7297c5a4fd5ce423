from gitea_release.cli.app import main

main()
