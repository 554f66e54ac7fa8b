NO_TOPIC_MSG = "No topic found in the query string"
INVALID_TOPIC_MSG = "Invalid topic"
NO_QID_MSG = "Missing qid param"
NO_STAGE_MSG = "Missing or invalid stage param"
NO_BODY_MSG = "Missing HTTP body"
UNSUPPORTED_METHOD_MSG = "Unsupported HTTP method"
UNAUTHORIZED_MSG = "Unauthorized"
