"""Entry point for the clinic-kb MCP server."""

from clinic_kb.server import create_server


def main() -> None:
    """Run the clinic-kb MCP server."""
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
