LOGGER_NAME = "camel_up"
