import os
from dotenv import load_dotenv


load_dotenv()


# Settings for all the lambdas. Handlers receive these values through constructors,
# nothing else in the project reads the environment.
class Config:
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')

    # DynamoDB tables and indexes
    QUESTIONS_TABLE = os.environ.get('QUESTIONS_TABLE', 'questions_20241009_1118')
    USERS_TABLE = os.environ.get('USERS_TABLE', 'users_20241023_0712')
    QUESTIONS_TOPIC_INDEX = os.environ.get('QUESTIONS_TOPIC_INDEX', 'topic-qid-index')
    QUESTIONS_AUTHOR_INDEX = os.environ.get('QUESTIONS_AUTHOR_INDEX', 'author-qid-index')

    # S3 bucket with index.html and other static assets
    ASSETS_BUCKET = os.environ.get('BUCKET_NAME', 'bitesized.info-assets')

    # ARN of the Secrets Manager secret with Stripe keys as JSON
    STRIPE_SECRET_ARN = os.environ.get('stripe_secret_arn')
    STRIPE_API_URL = os.environ.get('STRIPE_API_URL', 'https://api.stripe.com/v1')

    # Public RSA key of the identity provider in JWK form
    JWK_N = os.environ.get(
        'JWK_N',
        'v6TBTM87ZGheW4dN04giRLKS1cdIHnWV13UgOhsnIJSNDKgp842nbF3NnTYY1hiR8e_umkuzzkWeW8FR_R0OFVozDACaWakqfJB8'
        'kcx3A0oVAuiZpQgvt99mkn7TpqujdHkbA_xD-V0Or7mlApX4ZCiCdzyuU_AGQQ1yYsSaDF9paPCi1sTna5-xBHRsDgYOwrx49nhIw'
        'rohhHUgecRoYCV0Gs9gVMRLinVIUyvHsHW-qtTnpe3lYxLS_i6-vkLi16eAQ5ocnE0ZRniWeGOgmKM5MjZXAL23VZ_w7D_y5FbIxr'
        'icz_9BF9R1Kmu8M3nH_4kyqV1wE7LP1Q4F_vXEgw'
    )
    JWK_E = os.environ.get('JWK_E', 'AQAB')
    JWT_AUDIENCE = os.environ.get('JWT_AUDIENCE', 'p2xjvyoxb8HoKSt1QNDx7CQ8Ka2lXgUJ')

    # Comma-separated email hashes of users allowed to publish questions
    MODERATOR_EMAIL_HASHES = [
        h.strip() for h in os.environ.get(
            'MODERATOR_EMAIL_HASHES',
            '0e3bf888c95b085a7172b2e819692bb5b46c26ad067f9405c8ba1dd950732b65'
        ).split(',') if h.strip()
    ]

    # Feedback emails
    FEEDBACK_RECIPIENT = os.environ.get('FEEDBACK_RECIPIENT', 'max@onebro.me')
    EMAIL_FROM = os.environ.get('EMAIL_FROM', 'Bite-sized learning <max@bitesized.info>')
    SITE_URL = os.environ.get('SITE_URL', 'https://bitesized.info')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
