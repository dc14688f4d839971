import os
import logging
from dotenv import load_dotenv

# default env "dev"
env = os.getenv("ENV", "dev")

if env == "prod":
    env_file = ".env.prod"
else:
    env_file = ".env.dev"

load_dotenv(env_file)

logging.getLogger(__name__).debug("Loaded environment: %s (%s)", env, env_file)
