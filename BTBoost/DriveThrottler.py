import math

power_limit = 100

def clamp_power(value):
	"""
	Truncate to an int and clamp to [-100, 100]

	Anything that isn't a usable number (None, NaN, junk text) is a stop
	"""
	try:
		number = float(value)
	except (TypeError, ValueError):
		return 0
	if math.isnan(number):
		return 0
	if number > power_limit:
		return power_limit
	if number < -power_limit:
		return -power_limit
	return math.trunc(number)

class DriveThrottler():
	"""
	Drops motor commands that are identical to the last one sent

	A held key or a slider recomputes the same command constantly and each
	one would otherwise be a radio write.  Only compare values that have
	already been through clamp_power(), or 150 after 100 would look like a
	change.
	"""

	def __init__(self):
		self.last_sent = None

	def should_send(self, *clamped):
		"""
		drive() passes ( left, right ), the head motor passes ( power, )

		Records the command as sent when returning True
		"""
		if clamped == self.last_sent:
			return False
		self.last_sent = clamped
		return True

	def reset(self):
		# After a reconnect or a failed write the hub state is unknown
		self.last_sent = None
