"""Tests for single and bulk chapter overview parsing."""

from qbank.utils.overview_parser import parse_overview_chapters, parse_overview_text


SINGLE_OVERVIEW = """English Version
### T-01: Rest and Motion
*   A body is at rest.

*   Second point.

### T-02 & T-03: Speed
Distance per time.
"""


class TestSingleOverview:
    def test_topics_and_content(self):
        topics = parse_overview_text(SINGLE_OVERVIEW)['topics']

        assert [t.id for t in topics] == ['T-01', 'T-02 & T-03']
        assert [t.title for t in topics] == ['Rest and Motion', 'Speed']
        assert topics[0].content == '*   A body is at rest.\n\n*   Second point.'
        assert topics[1].content == 'Distance per time.'

    def test_bengali_topic_ids(self):
        topics = parse_overview_text('**টি-০১: স্থিতি**\nবস্তু স্থির থাকে।')['topics']
        assert topics[0].id == 'টি-০১'
        assert topics[0].title == 'স্থিতি'
        assert topics[0].content == 'বস্তু স্থির থাকে।'

    def test_invalid_input_gives_no_topics(self):
        assert parse_overview_text('') == {'topics': []}
        assert parse_overview_text(None) == {'topics': []}
        assert parse_overview_text('No topic headers at all') == {'topics': []}

    def test_to_dict(self):
        topic = parse_overview_text('T-01: Work\nForce times distance.')['topics'][0]
        assert topic.to_dict() == {'id': 'T-01', 'title': 'Work', 'content': 'Force times distance.'}


class TestBulkOverview:
    def test_chapter_banners_split_chapters(self):
        text = (
            'Chapter 1: Motion\n### T-01: Rest\nRest content.\n### T-02: Speed\nSpeed content.\n'
            'Chapter 2: Force\n### T-01: Newton laws\nLaw content.'
        )
        chapters = parse_overview_chapters(text, subject='Physics')

        assert [c['name'] for c in chapters] == ['Physics: Chapter 1: Motion', 'Physics: Chapter 2: Force']
        assert len(chapters[0]['data']['topics']) == 2
        assert chapters[1]['data']['topics'][0].content == 'Law content.'

    def test_mixed_languages_get_suffixes(self):
        text = '### T-01: Rest\nRest content.\n### টি-০১: স্থিতি\nস্থিতির বর্ণনা।'
        chapters = parse_overview_chapters(text)

        assert [c['name'] for c in chapters] == ['Chapter: Rest (English)', 'Chapter: স্থিতি (Bangla)']

    def test_numbering_restart_starts_a_new_chapter(self):
        text = '### T-01: A\na\n### T-02: B\nb\n### T-01: C\nc'
        chapters = parse_overview_chapters(text)

        assert [c['name'] for c in chapters] == ['Chapter: A', 'Chapter: C']
        assert [t.title for t in chapters[0]['data']['topics']] == ['A', 'B']

    def test_hard_separator(self):
        chapters = parse_overview_chapters('T-01: First\none\n-----\nT-05: Second\ntwo')
        assert len(chapters) == 2
        assert chapters[1]['data']['topics'][0].id == 'T-05'

    def test_version_banner_with_parenthesised_title(self):
        chapters = parse_overview_chapters('**English Version (Motion)**\n### T-01: Rest\nRest.')
        assert chapters[0]['name'] == 'English Version: Motion'

    def test_empty_input(self):
        assert parse_overview_chapters('') == []
        assert parse_overview_chapters('   ') == []
