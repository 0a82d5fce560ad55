"""Invoice actions and the collaborators they are wired to."""
