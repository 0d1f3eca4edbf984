"""Lambda handler for the Messages API using Mangum."""
from mangum import Mangum

from messages_api.main import create_app

# Create FastAPI app
app = create_app()

# The queue consumer only runs from the lifespan, which Lambda never starts
handler = Mangum(app, lifespan="off")

# Export handler for Lambda runtime
lambda_handler = handler
