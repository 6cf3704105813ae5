from .Errors import UnknownMode
from .PortResolver import number_from_text

# The UI says colorDistance, the firmware says colorAndDistance
mode_aliases = {
	'colorDistance': 'colorAndDistance',
}

fallback_mode = 'color'

def mode_name_for_id(mode_table, mode_id):
	# First name wins if the firmware reports two names for one mode
	for name, table_id in mode_table.items():
		if table_id == mode_id:
			return name
	return None

def resolve_mode(mode_table, requested_mode):
	"""
	Map a requested sensor mode onto the device's own mode table

	mode_table:
		{ mode_name: mode_id } as reported by the device
	requested_mode:
		A mode name, or a mode number (int or numeric string) when the caller
		knows exactly what it wants

	Returns ( mode_id, mode_name ), raises UnknownMode

	Mode tables differ between firmware revisions so this degrades to the
	plain color mode rather than making the caller know the exact names
	"""
	if mode_table is None:
		mode_table = {}

	if requested_mode is None:
		requested = ''
	else:
		requested = str(requested_mode).strip()

	if isinstance(requested_mode, bool):
		mode_number = None
	elif isinstance(requested_mode, (int, float)):
		mode_number = number_from_text(requested_mode)
	else:
		mode_number = number_from_text(requested)

	if mode_number is not None:
		mode_name = mode_name_for_id(mode_table, mode_number)
		if mode_name is None:
			mode_name = requested
		return ( mode_number, mode_name )

	if requested and requested in mode_table:
		return ( mode_table[requested], requested )

	if requested in mode_aliases:
		alias = mode_aliases[requested]
		if alias in mode_table:
			return ( mode_table[alias], alias )

	if fallback_mode in mode_table:
		return ( mode_table[fallback_mode], fallback_mode )

	raise UnknownMode(requested_mode)
