"""Generation and confirmation pipeline for owo."""
