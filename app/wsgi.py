"""ASGI handler for serverless hosting."""
from mangum import Mangum

from app.main import app

# Runs the startup hook so tables exist before the first request
handler = Mangum(app, lifespan="auto")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
