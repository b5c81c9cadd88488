"""
TenseTrainer - Daily English tense practice

Streamlit application for practising English tenses one at a time, with
AI-generated exercises, quizzes and vocabulary cards.

Usage:
    streamlit run app.py
"""

import asyncio
import logging

import streamlit as st

from tensetrainer.classroom import (
    AnswerKind,
    PracticeSession,
    ProgressTracker,
    SessionPhase,
    SQLiteStore,
    VocabularyManager,
    LoadState,
)
from tensetrainer.config import get_settings, setup_logging
from tensetrainer.curriculum import BLANK_MARKER, PASS_THRESHOLD, tense_position
from tensetrainer.errors import ContentFetchError
from tensetrainer.provider import GeminiContentProvider
from tensetrainer.schemas import TenseStatus, VocabularyItem


logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

st.set_page_config(
    page_title="TenseTrainer",
    page_icon="📝",
    layout="wide",
    initial_sidebar_state="expanded",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "settings" not in st.session_state:
        try:
            settings = get_settings()
        except ValueError as e:
            st.error(f"Invalid configuration: {e}")
            st.stop()
        setup_logging(settings.log_level)
        st.session_state.settings = settings

    settings = st.session_state.settings

    if "store" not in st.session_state:
        st.session_state.store = SQLiteStore(settings.store_path)

    if "progress" not in st.session_state:
        st.session_state.progress = ProgressTracker(st.session_state.store)

    if "provider" not in st.session_state:
        try:
            st.session_state.provider = GeminiContentProvider.from_settings(settings)
        except ContentFetchError as e:
            logger.error(f"Content provider unavailable: {e}")
            st.session_state.provider = None

    provider = st.session_state.provider
    if provider is None:
        return

    if "session" not in st.session_state:
        st.session_state.session = PracticeSession(
            provider,
            on_pass=st.session_state.progress.complete_tense,
        )

    if "vocabulary" not in st.session_state:
        st.session_state.vocabulary = VocabularyManager(st.session_state.store, provider)
        asyncio.run(st.session_state.vocabulary.daily_words())

    if "revision_cards" not in st.session_state:
        try:
            st.session_state.revision_cards = asyncio.run(provider.revision_cards())
        except ContentFetchError as e:
            logger.error(f"Failed to fetch revision cards: {e}")
            st.session_state.revision_cards = None


# -----------------------------------------------------------------------------
# Sidebar: Tenses and Streak
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with the tense list and streak."""
    progress: ProgressTracker = st.session_state.progress

    st.sidebar.title("📝 TenseTrainer")
    st.sidebar.markdown(f"**Daily Streak:** {progress.streak} 🔥")

    stats = progress.completion_stats()
    st.sidebar.markdown(
        f"**Today:** {stats['completed']}/{stats['total']} tenses ({stats['completion_percent']}%)"
    )
    st.sidebar.progress(stats["completion_percent"] / 100)

    st.sidebar.divider()
    st.sidebar.subheader("Tenses")

    active = progress.active_tense()
    for tense, status in progress.statuses().items():
        indicator = progress.status_indicator(tense)
        if status == TenseStatus.LOCKED:
            style = "color: #999;"
        elif status == TenseStatus.COMPLETED:
            style = "color: #388E3C;"
        elif tense == active:
            style = "color: #1976D2; font-weight: bold;"
        else:
            style = ""
        st.sidebar.markdown(f"<span style='{style}'>{indicator} {tense}</span>", unsafe_allow_html=True)

    st.sidebar.divider()
    if st.sidebar.button("Reset progress"):
        progress.reset_progress()
        st.rerun()


# -----------------------------------------------------------------------------
# Main Content: Practice View
# -----------------------------------------------------------------------------

def ensure_session_loaded(tense: str):
    """Load content when the active tense changed."""
    session: PracticeSession = st.session_state.session
    if session.tense != tense:
        with st.spinner(f"Generating {tense} practice..."):
            asyncio.run(session.load_session(tense))


def render_practice_view():
    """Render the practice area for the active tense."""
    if st.session_state.provider is None:
        st.error("GEMINI_API_KEY is not set. Add it to your .env file and restart.")
        return

    progress: ProgressTracker = st.session_state.progress
    session: PracticeSession = st.session_state.session
    tense = progress.active_tense()

    # A passed session stays on screen for review until the learner moves on
    if session.phase == SessionPhase.GRADED and session.report.passed:
        render_passed_session(session, tense)
        return

    if tense is None:
        st.success("Congratulations! You've mastered all the tenses for today.")
        st.markdown("Come back tomorrow to continue your streak!")
        return

    ensure_session_loaded(tense)

    pos, total = tense_position(tense)
    st.title(tense)
    st.caption(f"Tense {pos} of {total}")

    if session.phase == SessionPhase.ERROR:
        st.error(session.error)
        if st.button("Try Again"):
            asyncio.run(session.retry())
            st.rerun()
        return

    render_tense_detail(session)
    if session.phase == SessionPhase.GRADED:
        render_grade_report(session)
    render_fill_in_section(session)
    render_quiz_section(session)
    render_actions(session)


def render_passed_session(session: PracticeSession, next_tense: str | None):
    """Show the passed session read-only, with a way forward."""
    st.title(session.tense)
    render_grade_report(session)

    st.divider()
    if next_tense is None:
        st.success("Congratulations! You've mastered all the tenses for today.")
    elif st.button(f"Continue to {next_tense}", type="primary", use_container_width=True):
        with st.spinner(f"Generating {next_tense} practice..."):
            asyncio.run(session.load_session(next_tense))
        st.rerun()

    render_fill_in_section(session)
    render_quiz_section(session)


def render_tense_detail(session: PracticeSession):
    detail = session.detail
    if detail is None:
        return
    st.markdown(detail.description)
    columns = st.columns(max(1, len(detail.structures)))
    for column, structure in zip(columns, detail.structures):
        with column:
            st.markdown(f"**{structure.type}**")
            st.code(structure.formula, language=None)
            st.markdown(f"*\"{structure.example}\"*")


def render_grade_report(session: PracticeSession):
    report = session.report
    fill_in, quiz = report.fill_in, report.quiz
    lines = (
        f"Fill in the Blanks Score: {fill_in.correct} / {fill_in.total} {'✅' if fill_in.passed else '❌'}\n\n"
        f"Quiz Score: {quiz.correct} / {quiz.total} {'✅' if quiz.passed else '❌'}"
    )
    if report.passed:
        st.success(f"**Level Passed!**\n\n{lines}")
    else:
        st.error(
            f"**Try Again!**\n\n{lines}\n\n"
            f"You need to score at least {round(PASS_THRESHOLD * 100)}% on both sections "
            "to unlock the next tense."
        )


def render_fill_in_section(session: PracticeSession):
    st.divider()
    st.subheader("Fill in the Blanks")
    for index, exercise in enumerate(session.exercises, start=1):
        st.markdown(f"{index}. {exercise.sentence.replace(BLANK_MARKER, '______')}")
        value = st.text_input(
            f"Answer {index}",
            value=session.fill_in_answers.get(exercise.id, ""),
            placeholder=f"Base verb: {exercise.base_verb}",
            key=f"fill_{session.load_count}_{exercise.id}",
            disabled=session.is_read_only,
            label_visibility="collapsed",
        )
        if not session.is_read_only and value != session.fill_in_answers.get(exercise.id, ""):
            session.record_answer(AnswerKind.FILL_IN, exercise.id, value)

        correct = session.is_exercise_correct(exercise.id)
        if correct is not None:
            if correct:
                st.markdown(f":green[Correct answer: {exercise.correct_answer}]")
            else:
                st.markdown(f":red[Correct answer: {exercise.correct_answer}]")
                st.markdown(f":orange[**Reason:** {exercise.explanation}]")


def render_quiz_section(session: PracticeSession):
    st.divider()
    st.subheader("Multiple-Choice Quiz")
    for question in session.questions:
        selected = session.quiz_answers.get(question.id)
        choice = st.radio(
            question.question,
            question.options,
            index=question.options.index(selected) if selected in question.options else None,
            key=f"quiz_{session.load_count}_{question.id}",
            disabled=session.is_read_only,
        )
        if not session.is_read_only and choice is not None and choice != selected:
            session.record_answer(AnswerKind.QUIZ, question.id, choice)

        correct = session.is_question_correct(question.id)
        if correct is not None:
            if correct:
                st.markdown(":green[Correct]")
            else:
                st.markdown(f":red[Correct answer: {question.correct_answer}]")


def render_actions(session: PracticeSession):
    st.divider()
    if session.phase == SessionPhase.READY:
        if st.button("Submit & Grade", type="primary", use_container_width=True):
            session.grade()
            st.rerun()
    elif session.phase == SessionPhase.GRADED and not session.report.passed:
        if st.button("Try Again", use_container_width=True):
            with st.spinner("Generating new practice..."):
                asyncio.run(session.retry())
            st.rerun()


# -----------------------------------------------------------------------------
# Vocabulary Column
# -----------------------------------------------------------------------------

def render_vocabulary_card(item: VocabularyItem, key_prefix: str):
    vocabulary: VocabularyManager = st.session_state.vocabulary
    with st.container(border=True):
        marked = vocabulary.is_marked(item)
        col1, col2 = st.columns([5, 1])
        with col1:
            st.markdown(f"### {item.word}")
        with col2:
            if st.button("★" if marked else "☆", key=f"{key_prefix}_{item.word}"):
                vocabulary.toggle_mark(item)
                st.rerun()
        st.caption(item.source)
        st.markdown(f"\"{item.example}\"")
        st.markdown(f"**{st.session_state.settings.native_language}:** {item.translation}")
        forms = item.verb_forms
        if forms:
            v1, v2, v3 = forms
            st.markdown(f"**V1:** {v1} &nbsp; **V2:** {v2} &nbsp; **V3:** {v3}")


def render_vocabulary_column():
    if st.session_state.provider is None:
        return
    vocabulary: VocabularyManager = st.session_state.vocabulary

    st.header("Vocabulary")

    with st.form("word_search"):
        term = st.text_input("Search for a word", placeholder="Search for a word...")
        if st.form_submit_button("Search"):
            asyncio.run(vocabulary.search(term))
    if vocabulary.search_error:
        st.error(vocabulary.search_error)
    if vocabulary.search_result:
        render_vocabulary_card(vocabulary.search_result, "search")

    tab1, tab2, tab3 = st.tabs(["Today's Words", "Marked", "Daily Tips"])

    with tab1:
        if vocabulary.daily_state == LoadState.ERROR:
            st.error(vocabulary.daily_error)
            if st.button("Reload words"):
                asyncio.run(vocabulary.daily_words())
                st.rerun()
        for item in vocabulary.words:
            render_vocabulary_card(item, "daily")

    with tab2:
        if not vocabulary.marked_words:
            st.info("Star words to keep them here for revision.")
        for item in vocabulary.marked_words:
            render_vocabulary_card(item, "marked")

    with tab3:
        cards = st.session_state.revision_cards
        if cards is None:
            st.error("Could not load today's tips.")
        for card in cards or []:
            with st.container(border=True):
                st.markdown(f"**{card.title}**")
                st.markdown(card.content)


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()

    main_col, vocab_col = st.columns([3, 2])
    with main_col:
        render_practice_view()
    with vocab_col:
        render_vocabulary_column()


if __name__ == "__main__":
    main()
