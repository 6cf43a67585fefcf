import os

import uvicorn

if __name__ == "__main__":
    reload = os.environ.get("ENV", "dev") == "dev"
    port = int(os.environ.get("PORT", 8000))
    host = "127.0.0.1" if reload else "0.0.0.0"
    uvicorn.run("app.main:app", host=host, port=port, reload=reload)
