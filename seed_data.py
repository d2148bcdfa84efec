#!/usr/bin/env python3
"""
Simple standalone seed script - demo admin, template brand voices and one article
"""

import os
from datetime import datetime

from dotenv import load_dotenv
from pymongo import MongoClient

from auth import hash_password
from brand_voices import DEFAULT_VOICES
from database import ensure_indexes
from models import Preferences, text_metadata

load_dotenv()

# Connect
client = MongoClient(os.getenv('MONGODB_URI', 'mongodb://127.0.0.1:27017/'))
db = client[os.getenv('MONGODB_DB_NAME', 'liquid_news')]

# Clear all
print("Clearing database...")
for name in ('users', 'articles', 'brand_voices', 'reformatted_content', 'distributions'):
    db[name].delete_many({})
ensure_indexes(db)
print("✓ Cleared")

now = datetime.utcnow()

# Admin user
print("\nInserting admin user...")
admin = {
    'email': os.getenv('SEED_ADMIN_EMAIL', 'admin@liquidnews.com'),
    'password': hash_password(os.getenv('SEED_ADMIN_PASSWORD', 'changeme123')),
    'name': 'Newsroom Admin',
    'role': 'admin',
    'company': 'Liquid News',
    'avatar': None,
    'preferences': Preferences().model_dump(),
    'social_accounts': [],
    'created_at': now,
    'updated_at': now,
}
admin_id = db.users.insert_one(admin).inserted_id
print(f"✓ Admin ID: {admin_id} ({admin['email']})")

# Brand voices from the templates; the professional one is the default
print("\nInserting brand voices...")
voice_ids = {}
for key, template in DEFAULT_VOICES.items():
    voice = {
        **template,
        'created_by': admin_id,
        'is_default': key == 'professional',
        'created_at': now,
        'updated_at': now,
    }
    voice_ids[key] = db.brand_voices.insert_one(voice).inserted_id
    print(f"✓ {template['name']}: {voice_ids[key]}")

# Sample article
print("\nInserting sample article...")
content = (
    "City officials announced on Monday that the downtown light rail extension will open "
    "to passengers in the spring. According to the transit authority, the 4.2-mile line "
    "adds six stations and is expected to carry 18,000 riders a day. The project was "
    "funded through a combination of federal grants and a local sales tax approved by "
    "voters in 2019. Construction crews are completing final safety inspections this month."
)
article = {
    'title': 'Downtown Light Rail Extension to Open in Spring',
    'content': content,
    'original_content': content,
    'source_type': 'text',
    'source_url': None,
    'source_file': None,
    'uploaded_by': admin_id,
    'metadata': text_metadata(content),
    'status': 'pending',
    'brand_voice': voice_ids['professional'],
    'created_at': now,
    'updated_at': now,
}
article_id = db.articles.insert_one(article).inserted_id
print(f"✓ Article ID: {article_id}")

print("\n✓ Done")
