TEST_REGION = "us-east-1"
TEST_CONTENT = "Hello, world!"
TEST_OTHER_CONTENT = "Goodbye, world!"
