"""Allow ``python -m mcp_webcam``."""

from mcp_webcam.cli import main

if __name__ == "__main__":
    main()
