"""Package entry point for ``python -m ssml_pipeline``.

Delegates to the CLI's main(); see ssml_pipeline.cli for the subcommands.
"""

from ssml_pipeline.cli import main

if __name__ == "__main__":
    main()
