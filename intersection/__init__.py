"""Two-position traffic signal controller: reducer, store, coordinator and presenters."""

__version__ = "0.1.0"
