from .modules.manual_reset_event import *
from .modules.thread_safe_manual_reset_event import *
