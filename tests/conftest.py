import os
import tempfile

# Set test environment before anything imports the app settings
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="image-converter-uploads-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "false"
