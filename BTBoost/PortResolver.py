import math

from .Errors import EmptyPort

# Lettered ports as printed on the Move Hub
port_labels = ( 'A', 'B', 'C', 'D' )

def number_from_text(text):
	"""
	Return the finite number spelled by text, or None

	Integral values come back as int so they can be used as port or mode
	numbers on the wire
	"""
	try:
		number = float(text)
	except (TypeError, ValueError):
		return None
	if not math.isfinite(number):
		return None
	if number.is_integer():
		return int(number)
	return number

def resolve_port(port_input):
	"""
	Normalize a user supplied port into what the hub abstraction expects

	'b' -> 'B', ' 2 ' -> 2, anything else that isn't empty comes back trimmed
	so hubs with labels we haven't heard of still work
	"""
	if port_input is None:
		raise EmptyPort(port_input)

	text = str(port_input).strip()
	if not text:
		raise EmptyPort(port_input)

	upper = text.upper()
	if upper in port_labels:
		return upper

	number = number_from_text(text)
	if number is not None:
		return number

	return text
