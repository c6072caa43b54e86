"""Remote field names, option tables and sentinel values."""

# Index + 1 is the raw ``atType`` value used by the remote API.
MODE_OPTIONS: tuple[str, ...] = (
    "Off",
    "On",
    "Auto",
    "Timer to On",
    "Timer to Off",
    "Cycle",
    "Schedule",
    "VPD",
)
MODE_OFF = 1
MODE_ON = 2

DYNAMIC_RESPONSE_OPTIONS: tuple[str, ...] = ("Transition", "Buffer")
OUTSIDE_CLIMATE_OPTIONS: tuple[str, ...] = ("Neutral", "Lower", "Higher")
SETTINGS_MODE_OPTIONS: tuple[str, ...] = ("Auto", "Target")
TEMPERATURE_UNIT_OPTIONS: tuple[str, ...] = ("C", "F")

DEVICE_LOAD_TYPE_OPTIONS: dict[int, str] = {
    1: "Grow Light",
    2: "Humidifier",
    4: "Heater",
    5: "AC",
    6: "Fan",
}

DEVICE_MODELS: dict[int, str] = {
    11: "UIS Controller 69 Pro (CTR69P)",
    18: "UIS CONTROLLER 69 Pro+ (CTR69Q)",
}

SCHEDULE_DISABLED = 65535
SCHEDULE_MIDNIGHT = 0
SCHEDULE_END_OF_DAY = 1439

# Advanced settings of the controller itself live under port 0.
CONTROLLER_PORT = 0

ROOT = "devices"
CONNECTION_PATH = "info.connection"


class DeviceKey:
    """Fields of a device entry in the device list."""

    DEVICE_ID = "devId"
    DEVICE_NAME = "devName"
    MAC_ADDR = "devMacAddr"
    DEVICE_INFO = "deviceInfo"
    PORTS = "ports"
    HW_VERSION = "hardwareVersion"
    SW_VERSION = "firmwareVersion"
    DEVICE_TYPE = "devType"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    VPD = "vpdnums"
    ONLINE = "online"


class PortKey:
    """Fields of a port entry inside ``deviceInfo.ports``."""

    PORT = "port"
    NAME = "portName"
    SPEAK = "speak"
    ONLINE = "online"
    STATE = "loadState"
    REMAINING_TIME = "remainTime"
    AT_TYPE = "atType"
    CUR_MODE = "curMode"


class ModeKey:
    """Fields of a port's mode-settings record."""

    DEV_ID = "devId"
    MODE_SET_ID = "modeSetid"
    SURPLUS = "surplus"
    ON_SPEED = "onSpead"
    OFF_SPEED = "offSpead"
    AT_TYPE = "atType"
    SPEAK = "speak"
    SCHEDULED_START_TIME = "schedStartTime"
    SCHEDULED_END_TIME = "schedEndtTime"
    TIMER_TO_ON = "acitveTimerOn"
    TIMER_TO_OFF = "acitveTimerOff"
    CYCLE_ON = "activeCycleOn"
    CYCLE_OFF = "activeCycleOff"
    VPD_SETTINGS_MODE = "vpdSettingMode"
    VPD_HIGH_ENABLED = "activeHtVpd"
    VPD_HIGH_TRIGGER = "activeHtVpdNums"
    VPD_LOW_ENABLED = "activeLtVpd"
    VPD_LOW_TRIGGER = "activeLtVpdNums"
    VPD_TARGET_ENABLED = "targetVpdSwitch"
    VPD_TARGET = "targetVpd"
    AUTO_SETTINGS_MODE = "settingMode"
    AUTO_TEMP_HIGH_TRIGGER = "devHt"
    AUTO_TEMP_HIGH_TRIGGER_F = "devHtf"
    AUTO_TEMP_HIGH_ENABLED = "activeHt"
    AUTO_HUMIDITY_HIGH_TRIGGER = "devHh"
    AUTO_HUMIDITY_HIGH_ENABLED = "activeHh"
    AUTO_TEMP_LOW_TRIGGER = "devLt"
    AUTO_TEMP_LOW_TRIGGER_F = "devLtf"
    AUTO_TEMP_LOW_ENABLED = "activeLt"
    AUTO_HUMIDITY_LOW_TRIGGER = "devLh"
    AUTO_HUMIDITY_LOW_ENABLED = "activeLh"
    AUTO_TARGET_TEMP_ENABLED = "targetTSwitch"
    AUTO_TARGET_TEMP = "targetTemp"
    AUTO_TARGET_TEMP_F = "targetTempF"
    AUTO_TARGET_HUMIDITY_ENABLED = "targetHumiSwitch"
    AUTO_TARGET_HUMIDITY = "targetHumi"


class AdvancedKey:
    """Fields of an advanced-settings record (controller and ports)."""

    DEV_ID = "devId"
    DEV_NAME = "devName"
    TEMP_UNIT = "devCompany"
    CALIBRATE_TEMP = "devCt"
    CALIBRATE_TEMP_F = "devCth"
    CALIBRATE_HUMIDITY = "devCh"
    VPD_LEAF_TEMP_OFFSET = "vpdCt"
    VPD_LEAF_TEMP_OFFSET_F = "vpdCth"
    OUTSIDE_TEMP_COMPARE = "tempCompare"
    OUTSIDE_HUMIDITY_COMPARE = "humiCompare"
    DEVICE_LOAD_TYPE = "loadType"
    DYNAMIC_RESPONSE_TYPE = "isFlag"
    DYNAMIC_TRANSITION_TEMP = "devTt"
    DYNAMIC_TRANSITION_TEMP_F = "devTth"
    DYNAMIC_TRANSITION_HUMIDITY = "devTh"
    DYNAMIC_TRANSITION_VPD = "vpdTransition"
    DYNAMIC_BUFFER_TEMP = "devBt"
    DYNAMIC_BUFFER_TEMP_F = "devBth"
    DYNAMIC_BUFFER_HUMIDITY = "devBh"
    DYNAMIC_BUFFER_VPD = "devBvpd"
    SUNRISE_TIMER_ENABLED = "onTimeSwitch"
    SUNRISE_TIMER_DURATION = "onTime"


# Record preparation before a full-record resend.
MODE_RECORD_DROP: tuple[str, ...] = ("devMacAddr", "ipcSetting", "devSetting")
MODE_RECORD_DEFAULTS: dict[str, int] = {"vpdstatus": 0, "vpdnums": 0}

ADVANCED_RECORD_DROP: tuple[str, ...] = (
    "setId",
    "devMacAddr",
    "portResistance",
    "devTimeZone",
    "sensorSetting",
    "sensorTransBuff",
    "subDeviceVersion",
    "secFucReportTime",
    "updateAllPort",
    "calibrationTime",
)
ADVANCED_RECORD_STRINGS: tuple[str, ...] = (
    "sensorTransBuffStr",
    "sensorSettingStr",
    "portParamData",
    "paramSensors",
)
ADVANCED_RECORD_DEFAULTS: dict[str, int] = {
    "sensorOneType": 0,
    "isShare": 0,
    "targetVpdSwitch": 0,
    "sensorTwoType": 0,
    "zoneSensorType": 0,
}
