from . import lib  # so: from modules.site_search import lib
from .main import run  # so: from modules.site_search import run

__all__ = ["lib", "run"]
