class AppStatusCode:
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    OPERATION_SUCCESSFUL = "101"

    REQUIRED_VALIDATION_ERROR = "200"
    INVALID_INPUT = "201"
    DATA_NOT_FOUND = "202"

    OPERATION_ERROR = "300"
    OPERATION_FAILED = "301"
    CONFLICT_RETRY = "302"
