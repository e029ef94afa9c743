"""Static catalogs served as-is: daily quotes, crisis contacts, exercises, playlists."""

from __future__ import annotations

QUOTES = [
    {"text": "The only way to do great work is to love what you do.", "author": "Steve Jobs"},
    {"text": "Peace comes from within. Do not seek it without.", "author": "Buddha"},
    {"text": "Happiness is not something ready made. It comes from your own actions.", "author": "Dalai Lama"},
    {"text": "You yourself, as much as anybody in the entire universe, deserve your love and affection.", "author": "Buddha"},
    {"text": "Every moment is a fresh beginning.", "author": "T.S. Eliot"},
    {"text": "The journey of a thousand miles begins with one step.", "author": "Lao Tzu"},
    {"text": "The mind is everything. What you think you become.", "author": "Buddha"},
    {"text": "In the middle of every difficulty lies opportunity.", "author": "Albert Einstein"},
    {"text": "You are never too old to set another goal or to dream a new dream.", "author": "C.S. Lewis"},
    {"text": "Believe you can and you're halfway there.", "author": "Theodore Roosevelt"},
    {"text": "The way to get started is to quit talking and begin doing.", "author": "Walt Disney"},
    {"text": "Life is what happens when you're busy making other plans.", "author": "John Lennon"},
    {"text": "Everything you've ever wanted is on the other side of fear.", "author": "George Addair"},
    {"text": "Success is not final, failure is not fatal: it is the courage to continue that counts.", "author": "Winston Churchill"},
    {"text": "The only limit to our realization of tomorrow will be our doubts of today.", "author": "Franklin D. Roosevelt"},
]

EMERGENCY_CONTACTS = [
    {
        "name": "National Suicide Prevention Lifeline",
        "number": "988",
        "description": "24/7, free and confidential support",
        "type": "crisis",
    },
    {
        "name": "Crisis Text Line",
        "number": "Text HOME to 741741",
        "description": "24/7 text support with a crisis counselor",
        "type": "crisis",
    },
    {
        "name": "SAMHSA's National Helpline",
        "number": "1-800-662-4357",
        "description": "Treatment referral and information service",
        "type": "support",
    },
]

EMERGENCY_RESOURCES = [
    {
        "title": "Coping Strategies",
        "content": "Deep breathing, grounding exercises, and mindfulness techniques",
        "type": "self-help",
    },
    {
        "title": "Safety Plan",
        "content": "Steps to take when feeling unsafe or at risk",
        "type": "planning",
    },
    {
        "title": "Support Groups",
        "content": "Local and online support groups for mental health",
        "type": "community",
    },
]

SEDONA_EXERCISES = [
    {
        "id": 1,
        "title": "Basic Releasing",
        "description": "Learn the fundamental releasing technique",
        "duration": "10 minutes",
        "steps": [
            "Focus on an issue you'd like to work on",
            "Allow yourself to feel the emotions around this issue",
            'Ask yourself: "Could I let this feeling go?"',
            'Ask yourself: "Would I let it go?"',
            'Ask yourself: "When?"',
        ],
    },
    {
        "id": 2,
        "title": "Emotional Freedom",
        "description": "Release deep-seated emotional patterns",
        "duration": "15 minutes",
        "steps": [
            "Identify an emotional pattern you'd like to release",
            "Welcome the feelings that arise",
            "Notice your resistance to these feelings",
            "Allow the resistance to be there",
            "Choose to let go of the resistance",
        ],
    },
    {
        "id": 3,
        "title": "Goal Releasing",
        "description": "Release attachments to outcomes",
        "duration": "12 minutes",
        "steps": [
            "Think of a goal you're attached to",
            "Notice the feelings of wanting and attachment",
            "Allow yourself to want what you want",
            "Could you let go of wanting it?",
            "Notice the peace that remains",
        ],
    },
]

PLAYLISTS = [
    {
        "id": 1,
        "title": "Calming Nature Sounds",
        "description": "Soothing sounds of nature to help you relax",
        "tracks": [
            {"id": 1, "title": "Forest Stream", "duration": "10:00", "url": "https://example.com/forest-stream.mp3"},
            {"id": 2, "title": "Ocean Waves", "duration": "15:00", "url": "https://example.com/ocean-waves.mp3"},
            {"id": 3, "title": "Peaceful Piano Melody", "duration": "3:45", "url": "https://example.com/peaceful_piano.mp3"},
        ],
    },
]
