"""Qt glue: search debouncing and the browser session."""
