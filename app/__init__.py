"""Income tax calculator: progressive bracket engine, web calculator and CLI."""
