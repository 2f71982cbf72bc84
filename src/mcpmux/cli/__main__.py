"""Entry point for CLI execution as a module."""

if __name__ == "__main__":
    from mcpmux.cli.run import main

    main()
