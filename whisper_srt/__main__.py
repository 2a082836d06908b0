"""Package entry point for ``python -m whisper_srt``.

RULES:
- This file must exist for ``python -m whisper_srt`` to work
- Delegates straight to the CLI's main()
"""

from whisper_srt.cli import main

if __name__ == "__main__":
    main()
