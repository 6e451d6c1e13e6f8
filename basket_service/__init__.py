"""Per-customer basket store exposed over HTTP."""
