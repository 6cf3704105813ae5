import logging
import sys

from .Errors import BoostError, DiscoveryTimeout, NotConnected, EmptyPort, UnknownMode, NoSubscribeCapability, DeviceNotFound, HubConnectionError
from .Config import BoostConfig, load_config
from .PortResolver import resolve_port
from .ModeResolver import resolve_mode
from .EventNormalizer import EventKind, normalize_event
from .DriveThrottler import DriveThrottler, clamp_power
from .Controller import BoostController, ConnectionState, DeviceDescriptor
from .Commands import BoostCommands

def setLoggingLevel(level):
	logger = logging.getLogger(__name__)
	logger.setLevel(level)

	if not logger.hasHandlers():
		logger.addHandler(logging.StreamHandler(sys.stdout))
