from .client import Client
from .entry import RoyaltyEntry
from .setting import Setting
