"""ccgate — require an admin CC before a ticket can be saved."""

__version__ = "0.1.0"
