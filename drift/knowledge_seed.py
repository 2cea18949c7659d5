# ABOUTME: Bundled knowledge base loaded into the RAG store by `python -m drift.knowledge`.
# ABOUTME: Each entry is a topic, a short planning note, and the keywords that should retrieve it.

SEED_SNIPPETS = [
    {
        "topic": "running endurance",
        "keywords": ["run", "running", "marathon", "jog", "jogging", "cardio", "race", "endurance"],
        "content": (
            "Increase weekly running distance by no more than 10% per week. Alternate hard "
            "days (intervals, tempo) with easy days, keep one long run per week, and schedule "
            "at least one full rest day. Taper volume in the final week before a race."
        ),
    },
    {
        "topic": "strength training",
        "keywords": ["strength", "gym", "lift", "lifting", "muscle", "squat", "deadlift", "bench", "pushups", "workout"],
        "content": (
            "Train each major muscle group two to three times a week with 48 hours between "
            "sessions for the same group. Progress load or reps gradually, and pair heavy "
            "days with mobility or recovery work."
        ),
    },
    {
        "topic": "weight loss",
        "keywords": ["weight", "lose", "fat", "diet", "calories", "kg", "lbs", "nutrition", "healthy", "eating"],
        "content": (
            "A sustainable fat-loss rate is about 0.5-1% of body weight per week. Combine a "
            "modest calorie deficit, protein at every meal, daily walking and two to three "
            "strength sessions. Weigh in at the same time each week and log meals daily."
        ),
    },
    {
        "topic": "language learning",
        "keywords": ["language", "spanish", "french", "german", "japanese", "chinese", "italian", "vocabulary", "grammar", "fluent", "speaking"],
        "content": (
            "Daily short sessions beat occasional long ones. Mix spaced-repetition vocabulary "
            "review, listening to native audio, and speaking practice. Schedule a weekly "
            "conversation or self-recording to measure progress."
        ),
    },
    {
        "topic": "music practice",
        "keywords": ["guitar", "piano", "violin", "drums", "music", "song", "songs", "chords", "scales", "instrument", "sing", "singing"],
        "content": (
            "Structure practice as warm-up (scales, technique), focused work on one difficult "
            "passage at a slow metronome tempo, then playing through full pieces. Record one "
            "take per week to review timing and tone."
        ),
    },
    {
        "topic": "programming skills",
        "keywords": ["code", "coding", "programming", "python", "javascript", "react", "software", "developer", "app", "web", "leetcode", "algorithms"],
        "content": (
            "Learn by building: pair each new concept with a small exercise, then grow one "
            "project across the weeks. Reserve sessions for reading documentation, debugging "
            "and reviewing finished code. Ship a working milestone every week."
        ),
    },
    {
        "topic": "exam preparation",
        "keywords": ["exam", "exams", "test", "study", "studying", "sat", "gre", "certification", "course", "revision", "finals"],
        "content": (
            "Map the syllabus first and spread topics across the available days, leaving the "
            "final days for full practice tests. Use active recall and spaced review; revisit "
            "weak topics after each practice test."
        ),
    },
    {
        "topic": "writing projects",
        "keywords": ["write", "writing", "novel", "book", "blog", "essay", "thesis", "article", "chapter", "draft"],
        "content": (
            "Set a daily word-count target and separate drafting days from editing days. "
            "Outline before drafting, finish a full rough draft before polishing, and plan "
            "at least one revision pass with outside feedback."
        ),
    },
    {
        "topic": "reading habit",
        "keywords": ["read", "reading", "books", "pages", "literature", "library"],
        "content": (
            "Convert the target into pages per day and attach reading to an existing routine "
            "such as commuting or bedtime. Keep a short log of takeaways after each session."
        ),
    },
    {
        "topic": "public speaking",
        "keywords": ["speaking", "speech", "presentation", "talk", "toastmasters", "confidence", "pitch"],
        "content": (
            "Practice out loud with a timer, record rehearsals and review them, and seek small "
            "live audiences before the main event. Prepare the opening and closing word for word."
        ),
    },
    {
        "topic": "habit building",
        "keywords": ["habit", "habits", "routine", "meditation", "meditate", "sleep", "journal", "journaling", "mindfulness", "morning"],
        "content": (
            "Anchor the new habit to an existing cue, start with a two-minute version, and "
            "track a daily streak. Increase duration only after a full week of consistency."
        ),
    },
    {
        "topic": "saving money",
        "keywords": ["save", "saving", "money", "budget", "budgeting", "debt", "invest", "investing", "finance", "finances"],
        "content": (
            "Review the last month of spending, set a weekly budget per category, and automate "
            "a transfer to savings on payday. Check progress against the target every week."
        ),
    },
]
