from dotenv import load_dotenv
import os

load_dotenv()

ENV_VARS = [
    "ASSISTANT_URL",
    "ASSISTANT_APIKEY",
    "ASSISTANT_ID",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_WHATSAPP_NUMBER",
    "REDIS_HOST",
    "REDIS_PORT",
    "REDIS_PASSWORD",
    "REDIS_SSL",
]


class Config:
    port = int(os.getenv("PORT", "3000"))

    # -------- WATSON ASSISTANT --------
    assistant_url = os.getenv("ASSISTANT_URL", "").rstrip("/")
    assistant_apikey = os.getenv("ASSISTANT_APIKEY", "")
    assistant_id = os.getenv("ASSISTANT_ID", "")
    assistant_version = os.getenv("ASSISTANT_VERSION", "2021-06-14")
    iam_token_url = os.getenv("IAM_TOKEN_URL", "https://iam.cloud.ibm.com/identity/token")
    http_timeout = float(os.getenv("HTTP_TIMEOUT", "30"))

    # -------- TWILIO --------
    twilio_account_sid = os.getenv("TWILIO_ACCOUNT_SID", "")
    twilio_auth_token = os.getenv("TWILIO_AUTH_TOKEN", "")
    twilio_whatsapp_number = os.getenv("TWILIO_WHATSAPP_NUMBER", "")

    # -------- REDIS --------
    redis_host = os.getenv("REDIS_HOST", "localhost")
    redis_port = int(os.getenv("REDIS_PORT", "6379"))
    redis_password = os.getenv("REDIS_PASSWORD", "")
    # Default to True for managed Redis, but allow False for local dev
    redis_ssl = os.getenv("REDIS_SSL", "true").lower() == "true"
    use_local_redis = os.getenv("USE_LOCAL_REDIS", "false").lower() == "true"

    # -------- ASSISTANT BEHAVIOUR --------
    local_reply_delay = float(os.getenv("LOCAL_REPLY_DELAY", "1.0"))
    training_tick_seconds = float(os.getenv("TRAINING_TICK_SECONDS", "0.5"))
    analysis_delay = float(os.getenv("ANALYSIS_DELAY", "1.5"))
    min_training_images = int(os.getenv("MIN_TRAINING_IMAGES", "5"))
    max_upload_bytes = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

    @staticmethod
    def check_env_variables():
        for key in ENV_VARS:
            if not os.getenv(key):
                print(f"WARNING: Missing the environment variable {key}")

    @staticmethod
    def print_config():
        print("Config values:")
        print(f"port={Config.port}")
        print(f"assistant_url={Config.assistant_url}")
        print(f"assistant_id={Config.assistant_id}")
        print(f"assistant_version={Config.assistant_version}")
        print(f"twilio_whatsapp_number={Config.twilio_whatsapp_number}")
        print(f"redis_host={Config.redis_host}")
        print(f"redis_port={Config.redis_port}")
        print(f"use_local_redis={Config.use_local_redis}")
        print(f"local_reply_delay={Config.local_reply_delay}")
        print(f"training_tick_seconds={Config.training_tick_seconds}")
        print(f"min_training_images={Config.min_training_images}")
