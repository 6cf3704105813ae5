from enum import IntEnum

# LPF2 devices found on or plugged into a Move Hub (io_type_id_str indicies)
class LDev(IntEnum):
	VISION = 0x25
	MOTOR_BOOST = 0x26
	MOTOR_BOOST_INTERNAL = 0x27

class Decoder():

	lego_manufacturer_id = 919

	advertised_system_type = {
		0x20:'duplotrain',	# "Hub No. 5" "Train Base"
		0x40:'boostmove',	# "LEGO Move Hub" "LEGO® Powered Up 88006 Move Hub" The set this hub comes in (17101) is called "Boost"
		0x41:'hub_4',		# Lego 88009 Powered Up "Hub", "HUB NO.4"
		0x42:'handset',		# Lego 88010 Remote Control for Powered Up
		0x80:'hub_2'		# "Hub No. 2" Lego 88012, "Technic Hub"
	}

	#https://lego.github.io/lego-ble-wireless-protocol-docs/index.html#message-typ
	message_type_str = {
		0x1:"hub_properties",
		0x2:"hub_actions",
		0x3:"hub_alerts",
		0x4:"hub_attached_io",
		0x5:"generic_error",
		0x8:"hw_network_cmd",
		0x21:"port_info_req",
		0x22:"port_mode_info_req",
		0x41:"port_input_format_setup_single",
		0x42:"port_input_format_setup_combi",
		0x43:"port_info",
		0x44:"port_mode_info",
		0x45:"port_value_single",
		0x46:"port_value_combi",
		0x47:"port_input_format_single",
		0x48:"port_input_format_combi",
		0x61:"virtual_port_setup",
		0x81:"port_output_command",
		0x82:"port_output_command_feedback"
	}

	io_event_type_str = {
		0x0: 'detached',
		0x1: 'attached',
		0x2: 'attached_virtual'
	}

	io_type_id_str = {
		0x1:'Motor',
		0x2:'System Train Motor',
		0x5:'Button',
		0x8:'LED Light',
		0x14:'Voltage',
		0x15:'Current',
		0x16:'Piezo Tone',
		0x17:'RGB Light',
		0x22:'External Tilt Sensor',
		0x23:'Motion Sensor',
		0x25:'Vision Sensor',				# BOOST Color & Distance sensor
		0x26:'External Motor with Tacho',	# BOOST Interactive Motor
		0x27:'Internal Motor with Tacho',	# BOOST Motor Built-in to Move hub
		0x28:'Internal Tilt',
	}

	hub_action_type = {
		# Downstream
		0x1:'Switch Off Hub',
		0x2:'Disconnect',
		0x2F:'Shutdown',		# Fast powerdown, no messages

		# Upstream
		0x30:'Hub Will Switch Off',
		0x31:'Hub Will Disconnect',
		0x32:'Hub Will Go Into Boot Mode'
	}

	# LWP 3.9
	generic_errors = {
		0x1:'ACK',
		0x2:'Multiple ACK',
		0x3:'Buffer Overflow',
		0x4:'Timeout',
		0x5:'Command was not recognized',
		0x6:'Invalid use of command',
		0x7:'Overcurrent',
		0x8:'Internal Error'
	}

	def determine_device_systemtype(advertisement_data):
		# https://lego.github.io/lego-ble-wireless-protocol-docs/index.html#document-2-Advertising
		# 919 aka 0x397 or the lego manufacturer id
		# 00 Button state
		# 40 System type (Move Hub)
		# 06 Capabilites, ff Last network ID, ff Status, 00 Option
		manufacturer_data = getattr(advertisement_data, 'manufacturer_data', None) or {}
		if Decoder.lego_manufacturer_id in manufacturer_data:
			lego_data = manufacturer_data[Decoder.lego_manufacturer_id]
			if len(lego_data) > 1:
				return lego_data[1]
		return 0x0

	def determine_device_shortname(advertisement_data):
		systype = Decoder.determine_device_systemtype(advertisement_data)
		if systype in Decoder.advertised_system_type:
			return Decoder.advertised_system_type[systype]
		else:
			return 'UNKNOWN_LEGO_'+hex(systype)

	def decode_payload(message_bytes):
		bt_message = {
			'error': False,
			'raw':message_bytes
		}
		if len(message_bytes) < 3:
			bt_message['error'] = True
			bt_message['type'] = None
			bt_message['readable'] = "CORRUPTED MESSAGE: too short "+" ".join(hex(n) for n in message_bytes)
			return bt_message

		# FIXME: Doesn't detect lengths over 127
		# https://lego.github.io/lego-ble-wireless-protocol-docs/index.html#message-length-encoding
		length = message_bytes[0]
		if len(message_bytes) != length:
			bt_message['error'] = True
			bt_message['readable'] = "CORRUPTED MESSAGE: stated len "+str(length)+" != "+str(len(message_bytes))+" "+" ".join(hex(n) for n in message_bytes)+" "
			# Don't return, attempt to decode, since error flag set
		else:
			bt_message['readable'] = ''
		bt_message['type']  = message_bytes[2]
		bt_message['readable'] += Decoder.int8_dict_to_str(Decoder.message_type_str, bt_message['type']) + " - "

		if bt_message['type'] == 0x2:
			Decoder.decode_hub_action(bt_message)
		elif bt_message['type'] == 0x4:
			Decoder.decode_hub_attached_io(bt_message)
		elif bt_message['type'] == 0x5:
			Decoder.decode_generic_error(bt_message)
		elif bt_message['type'] == 0x45:
			Decoder.decode_port_value_single(bt_message)
		elif bt_message['type'] == 0x47:
			Decoder.decode_port_input_format_single(bt_message)
		elif bt_message['type'] == 0x82:
			Decoder.decode_port_output_command_feedback(bt_message)
		else:
			# Not an error, the driver just doesn't care about it
			bt_message['readable'] += "Not decoded: "+" ".join(hex(n) for n in message_bytes)

		return bt_message

	def decode_hub_action(bt_message):
		if len(bt_message['raw']) != 4:
			bt_message['readable'] += "CORRUPTED MESSAGE: mesage len "+str(len(bt_message['raw']))+" is wrong for a hub action: "+" ".join(hex(n) for n in bt_message['raw'])
			bt_message['error'] = True
			return

		bt_message['action'] = bt_message['raw'][3]
		bt_message['action_str'] = Decoder.int8_dict_to_str(Decoder.hub_action_type, bt_message['action'])
		bt_message['readable'] += "Hub action "+hex(bt_message['raw'][3])+ ":"+bt_message['action_str']

	def decode_hub_attached_io(bt_message):
		payload = bt_message['raw'][3:]
		io_size_indicator = len(bt_message['raw'])

		if len(payload) < 2:
			bt_message['error'] = True
			bt_message['readable'] += "INVALID IO LENGTH ("+str(io_size_indicator)+")"
			return

		port = payload[0]
		bt_message['port'] = port
		event = Decoder.int8_dict_to_str(Decoder.io_event_type_str,payload[1])
		bt_message['event_str'] = event
		# attached
		if io_size_indicator == 15:
			bt_message['io_type_id'] = Decoder.uint16_bytes_to_int(payload[2:4])
			hw_rev = Decoder.version_bytes_to_str(payload[4:8])
			bt_message['hw_ver_str'] = hw_rev
			sw_rev = Decoder.version_bytes_to_str(payload[8:12])
			bt_message['sw_ver_str'] = sw_rev
			bt_message['readable'] += "port "+str(port)+" "+event+" IOTypeID:"+str(bt_message['io_type_id'])+" hw:"+hw_rev+" sw:"+sw_rev
		# attached_virtual
		elif io_size_indicator == 9:
			bt_message['io_type_id'] = Decoder.uint16_bytes_to_int(payload[2:4])
			bt_message['readable'] += "port "+str(port)+" "+event+" IOTypeID:"+str(bt_message['io_type_id'])+" Port A:"+str(payload[4])+" Port B:"+str(payload[5])
		#  detached
		elif io_size_indicator == 5:
			bt_message['readable'] += "port "+str(port)+" "+event
		else:
			bt_message['error'] = True
			bt_message['readable'] += "INVALID IO LENGTH ("+str(io_size_indicator)+"):  "+" ".join(hex(n) for n in payload)

	def decode_generic_error(bt_message):
		if len(bt_message['raw']) != 5:
			bt_message['readable'] += "CORRUPTED MESSAGE: message len "+str(len(bt_message['raw']))+" is wrong for a hub error: "+" ".join(hex(n) for n in bt_message['raw'])
			bt_message['error'] = True
			return

		bt_message['error'] = True
		error_cause = bt_message['raw'][3]
		error_code = bt_message['raw'][4]
		readable = Decoder.int8_dict_to_str(Decoder.generic_errors, error_code)
		bt_message['readable'] += "Command "+Decoder.int8_dict_to_str(Decoder.message_type_str, error_cause)+" caused error: "+readable

	def decode_port_value_single(bt_message):
		payload = bt_message['raw'][3:]
		if len(payload) < 1:
			bt_message['error'] = True
			bt_message['readable'] += "CORRUPTED MESSAGE: port value without a port"
			return
		bt_message['port'] = payload[0]
		bt_message['value'] = bytes(payload[1:])
		bt_message['readable'] += "port "+str(bt_message['port'] )+": "+" ".join(hex(n) for n in payload[1:])

	def decode_port_input_format_single(bt_message):
		payload = bt_message['raw'][3:]
		if len(payload) < 7:
			bt_message['error'] = True
			bt_message['readable'] += "CORRUPTED MESSAGE: short port input format: "+" ".join(hex(n) for n in payload)
			return
		# Only logged, the device already knows what it asked for
		delta = int.from_bytes(payload[2:6], byteorder="little", signed=False)
		notifications = " Notifications disabled"
		if payload[6]:
			notifications = " Notifications enabled"
		bt_message['readable'] += "port "+str(payload[0])+" mode " + str(payload[1]) + " delta interval:"+str(delta)+notifications

	def decode_port_output_command_feedback(bt_message):
		payload = bt_message['raw'][3:]
		# 0x5 0x0 0x82 [0x4 0xa]
		if len(payload) % 2 != 0:
			bt_message['readable'] += "CORRUPTED MESSAGE: length of payload "+str(len(payload))+" is not divisible by 2: "+" ".join(hex(n) for n in payload)
			return
		for p in range(0, len(payload), 2):
			feedback = payload[p+1]
			states = [ name for bit, name in ( (0x2, 'completed'), (0x4, 'discarded'), (0x8, 'idle') ) if feedback & bit ]
			bt_message['readable'] += "port:"+str(payload[p])+" feedback:"+hex(feedback)+" "+",".join(states)+" "

	# --- Utilities

	def int8_dict_to_str(int8_dict,int8_value):
		if int8_value in int8_dict:
			return int8_dict[int8_value]
		else:
			return "__unknown("+str(hex(int8_value))+")"

	def uint16_bytes_to_int(uint16):
		return int.from_bytes(uint16, byteorder="little", signed=False)

	def version_bytes_to_str(int32):
		# 0x9 0x0 0x1 0x4 0x6 [ 0x0 0x0 0x0 0x2 ]    33554432
		major = (int32[3] >> 4) & 0x7
		minor = int32[3] & 0xf
		fix = (int(int32[2] >> 4)*10)+int(int32[2] & 0xf)
		build = (int(int32[1] >> 4)*1000)+(int(int32[1] & 0xf)*100)+(int(int32[0] >> 4)*10)+int(int32[0] & 0xf)
		return "v"+str(major)+"."+str(minor)+"."+str(fix)+"."+str(build)
