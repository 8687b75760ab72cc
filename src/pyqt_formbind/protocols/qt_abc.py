"""Metaclass letting QObject subclasses also be ABCs."""

from abc import ABCMeta

from PyQt6.QtCore import QObject


class PyQtABCMeta(type(QObject), ABCMeta):
    """Combined Qt/ABC metaclass for accessors and directives."""
    pass
