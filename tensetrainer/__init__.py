"""
TenseTrainer - Daily English tense practice for ESL learners.

Grammar lessons, quizzes and vocabulary cards are generated on demand by a
language model; this package owns the bookkeeping around them:
- Progress: which tenses are unlocked, completed, and the daily streak
- Practice sessions: fetching lesson content and grading answers
- Vocabulary: the daily word batch, word lookup and the revision list
"""

__version__ = "0.1.0"
