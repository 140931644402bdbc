"""Terminal chat client: application state, widgets, pages and terminal drawing."""