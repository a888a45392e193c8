DOMAIN = "ducobox_serial"
MANUFACTURER = "Duco"

CONF_PORT_PATTERN = "port_pattern"
CONF_SCAN_INTERVAL = "scan_interval"
CONF_SINK_URL = "sink_url"

DEFAULT_PORT_PATTERN = "/dev/ttyUSB*"
DEFAULT_SCAN_INTERVAL = 10
MIN_SCAN_INTERVAL = 5
DEFAULT_SINK_URL = "http://thingify-core:80/api-rest/things"

BAUDRATE = 115200
READ_IDLE_TIMEOUT = 0.5
WRITE_TIMEOUT = 3.0
PACING_DELAY = 0.01
LINE_TERMINATOR = b"\r"

CMD_BOARDINFO = "boardinfo"
CMD_NETWORK = "network"
CMD_COMMNLINFO = "commnlinfo"
CMD_FANSPEED = "fanspeed"
CMD_NODEPARAGET = "nodeparaget {node} {param}"
PARAM_CO2 = 74

SERVICE_SCAN_NOW = "scan_now"

MODE_VALUES = ("AUTO", "MAN1", "MAN2", "MAN3")
