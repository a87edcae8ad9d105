"""Side effects applied to a confirmed command: clipboard, execution."""
