from lmstudio_mcp.server import main

main()
