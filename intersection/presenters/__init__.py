"""Presenters: the interface the coordinator publishes state to, plus a logging implementation."""

from intersection.presenters.base import SignalPresenter
from intersection.presenters.logging_presenter import LoggingPresenter

__all__ = ["SignalPresenter", "LoggingPresenter"]
