"""Infrastructure layer — storage backends for the rule set."""
