"""
API endpoint tests for the BalanceMe progress engine.
"""
import pytest
import json
from datetime import timedelta

from app import db
from models import DailyGoalCheckin, Goal, MoodEntry
from tests.conftest import REFERENCE_DATE, WEEK_KEY, WEEK_MONDAY, add_mood, at, make_goal


def post_json(client, url, payload=None):
    return client.post(url, data=json.dumps(payload or {}), content_type='application/json')


def patch_json(client, url, payload):
    return client.patch(url, data=json.dumps(payload), content_type='application/json')


class TestAuthentication:

    @pytest.mark.parametrize('method, url', [
        ('get', '/goals/'),
        ('post', '/goals/reports'),
        ('get', '/daily-goals/'),
        ('post', '/api/moods'),
        ('get', '/api/streak'),
    ])
    def test_session_required(self, client, method, url):
        response = getattr(client, method)(url)
        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_index(self, client):
        assert client.get('/').get_json()['success'] is True

    def test_unknown_route_is_json(self, client):
        response = client.get('/nope')
        assert response.status_code == 404
        assert response.get_json() == {'success': False, 'message': 'Not found'}


class TestGoalEndpoints:
    """Test suite for /goals."""

    def test_create_and_list(self, logged_in_client):
        response = post_json(logged_in_client, '/goals/', {
            'title': 'Move more', 'category': 'habit', 'target_value': 5,
            'filters': {'categories': ['movimiento']},
        })

        assert response.status_code == 201
        goal = response.get_json()['goal']
        assert goal['filters'] == {'categories': ['movement']}
        assert goal['measurement_label'] == 'entries'

        listing = logged_in_client.get('/goals/').get_json()
        assert [g['id'] for g in listing['goals']] == [goal['id']]
        assert listing['analytics']['active_goals'] == 1

    def test_invalid_goal_is_400(self, logged_in_client):
        response = post_json(logged_in_client, '/goals/', {'title': 'Bad', 'category': 'custom',
                                                           'metric_type': 'avg_mood'})
        assert response.status_code == 400
        assert Goal.query.count() == 0

    def test_fourth_active_goal_is_409(self, logged_in_client):
        for index in range(3):
            assert post_json(logged_in_client, '/goals/', {'title': f'G{index}', 'target_value': 1}).status_code == 201

        response = post_json(logged_in_client, '/goals/', {'title': 'G3', 'target_value': 1})
        assert response.status_code == 409
        assert 'up to 3 active goals' in response.get_json()['message']

    def test_patch_archive_and_missing_goal(self, logged_in_client, db_session, test_user):
        goal = make_goal(db_session, test_user, title='Read')

        response = patch_json(logged_in_client, f'/goals/{goal.id}', {'target_value': 4, 'user_id': 999})
        assert response.status_code == 200
        assert response.get_json()['goal']['target_value'] == 4

        archived = post_json(logged_in_client, f'/goals/{goal.id}/archive').get_json()['goal']
        assert archived['is_active'] is False
        assert archived['archived_at'] is not None

        assert patch_json(logged_in_client, '/goals/999', {'title': 'x'}).status_code == 404

        listing = logged_in_client.get('/goals/?include_archived=true').get_json()
        assert len(listing['goals']) == 1

    def test_log_activity(self, logged_in_client, db_session, test_user):
        goal = make_goal(db_session, test_user, title='Read')
        response = post_json(logged_in_client, f'/goals/{goal.id}/activities', {'value': 2, 'note': 'two chapters'})

        assert response.status_code == 201
        assert response.get_json()['activity']['value'] == 2


class TestReportEndpoints:
    """Test suite for /goals/reports and /goals/snapshots."""

    def test_generate_then_skip(self, logged_in_client, db_session, test_user, mood_goal):
        for offset, valence in enumerate((2, 2, 1, 2)):
            add_mood(db_session, test_user, valence, at(WEEK_MONDAY + timedelta(days=offset)))

        first = post_json(logged_in_client, '/goals/reports', {'reference_date': REFERENCE_DATE.isoformat()})
        assert first.status_code == 201
        body = first.get_json()
        assert body['week_key'] == WEEK_KEY
        assert body['goal_summaries'][0]['actual_value'] == 1.75

        second = post_json(logged_in_client, '/goals/reports', {'reference_date': REFERENCE_DATE.isoformat()})
        assert second.status_code == 200
        assert second.get_json()['skipped'] is True

        forced = post_json(logged_in_client, '/goals/reports',
                           {'reference_date': REFERENCE_DATE.isoformat(), 'force': True})
        assert forced.status_code == 201

        reports = logged_in_client.get('/goals/reports').get_json()['reports']
        assert [report['week_key'] for report in reports] == [WEEK_KEY]

        snapshots = logged_in_client.get(f'/goals/snapshots?goal_id={mood_goal.id}').get_json()['snapshots']
        assert snapshots[0]['met'] is True
        assert snapshots[0]['streak_after_week'] == 1

    def test_no_active_goals_is_409(self, logged_in_client):
        response = post_json(logged_in_client, '/goals/reports', {'reference_date': REFERENCE_DATE.isoformat()})
        assert response.status_code == 409

    def test_bad_reference_date_is_400(self, logged_in_client, mood_goal):
        response = post_json(logged_in_client, '/goals/reports', {'reference_date': 'last week'})
        assert response.status_code == 400


class TestDailyGoalEndpoints:
    """Test suite for /daily-goals."""

    def test_crud(self, logged_in_client):
        created = post_json(logged_in_client, '/daily-goals/', {'title': 'Stretch'})
        assert created.status_code == 201
        goal_id = created.get_json()['goal']['id']

        updated = patch_json(logged_in_client, f'/daily-goals/{goal_id}', {'title': 'Stretch 10 min'})
        assert updated.get_json()['goal']['title'] == 'Stretch 10 min'

        post_json(logged_in_client, f'/daily-goals/{goal_id}/deactivate')
        assert logged_in_client.get('/daily-goals/').get_json()['goals'] == []
        assert len(logged_in_client.get('/daily-goals/?include_inactive=true').get_json()['goals']) == 1

        assert logged_in_client.delete(f'/daily-goals/{goal_id}').status_code == 200
        assert logged_in_client.delete(f'/daily-goals/{goal_id}').status_code == 404

    def test_streak_fields_cannot_be_patched(self, logged_in_client, daily_goal):
        response = patch_json(logged_in_client, f'/daily-goals/{daily_goal.id}', {'best_streak_weeks': 50})
        assert response.status_code == 200
        assert response.get_json()['goal']['best_streak_weeks'] == 0

    def test_toggle_twice(self, logged_in_client, daily_goal):
        first = post_json(logged_in_client, f'/daily-goals/{daily_goal.id}/toggle')
        second = post_json(logged_in_client, f'/daily-goals/{daily_goal.id}/toggle')

        assert first.get_json()['already_done'] is False
        assert first.get_json()['goal']['last_completed_date'] is not None
        assert second.get_json()['already_done'] is True
        assert DailyGoalCheckin.query.filter_by(goal_id=daily_goal.id).count() == 1

    def test_weekly_completion(self, logged_in_client, db_session, daily_goal):
        for offset in range(5):
            day = WEEK_MONDAY + timedelta(days=offset)
            db_session.add(DailyGoalCheckin(goal_id=daily_goal.id, date_key=day.isoformat(), check_date=day,
                                            done=True))
        db_session.commit()

        response = logged_in_client.get(f'/daily-goals/{daily_goal.id}/completion?week_start=2025-03-12')
        body = response.get_json()

        assert body['week_start'] == '2025-03-10'
        assert body['completed_days'] == 5
        assert body['completion_percent'] == 71

    def test_toggle_unknown_goal_is_404(self, logged_in_client):
        assert post_json(logged_in_client, '/daily-goals/4242/toggle').status_code == 404


class TestApiEndpoints:
    """Test suite for /api."""

    def test_log_mood_and_habits_builds_streak(self, logged_in_client, test_user):
        mood = post_json(logged_in_client, '/api/moods', {'emojis': ['alegre', 'tranquilo'], 'note': 'good day'})
        assert mood.status_code == 201
        assert mood.get_json()['entry']['scores'] == {'valence': 1.5, 'energy': 1.25}

        assert logged_in_client.get('/api/streak').get_json()['streak'] == 0

        habits = post_json(logged_in_client, '/api/habits', {'preset_habits': ['movement'], 'summary': 'walk'})
        assert habits.status_code == 201

        streak = logged_in_client.get('/api/streak').get_json()
        assert streak['streak'] == 1
        assert streak['recent_checkins'][0]['mood_logged'] is True

    def test_mood_emojis_must_be_a_list(self, logged_in_client):
        response = post_json(logged_in_client, '/api/moods', {'emojis': 'alegre'})
        assert response.status_code == 400
        assert MoodEntry.query.count() == 0

    def test_update_timezone_api(self, logged_in_client, test_user):
        response = post_json(logged_in_client, '/api/update-timezone', {'timezone': 'America/New_York'})

        assert response.status_code == 200
        assert response.get_json()['timezone'] == 'America/New_York'
        db.session.refresh(test_user)
        assert test_user.timezone == 'America/New_York'

    def test_update_timezone_rejects_unknown(self, logged_in_client):
        assert post_json(logged_in_client, '/api/update-timezone', {'timezone': 'Mars/Base'}).status_code == 400
        assert post_json(logged_in_client, '/api/update-timezone', {}).status_code == 400
