"""
Shared fixtures for launcher tests
"""

import pytest

from adaptive_launcher.launcher_models import ActionPrediction, App


@pytest.fixture
def catalog():
    """Small device catalog with usage statistics"""
    return [
        App("com.headspace.android", "Headspace", category="Health", usage_count=56),
        App("com.slack", "Slack", category="Work", usage_count=145),
        App("com.netflix.mediaclient", "Netflix", category="Entertainment", usage_count=189),
        App("com.spotify.music", "Spotify", category="Music", usage_count=267),
        App("com.google.android.gm", "Gmail", category="Email", usage_count=234),
    ]


@pytest.fixture
def apps_by_name(catalog):
    return {app.display_name: app for app in catalog}


@pytest.fixture
def morning_predictions(apps_by_name):
    """Meditation plus work check, the canonical morning batch"""
    return [
        ActionPrediction(
            action="Start meditation",
            confidence=0.89,
            associated_apps=[apps_by_name["Headspace"]],
            reasoning="User typically starts morning with mindfulness",
            priority=1,
        ),
        ActionPrediction(
            action="Check work messages",
            confidence=0.75,
            associated_apps=[apps_by_name["Slack"]],
            reasoning="Morning communication check pattern",
            priority=2,
        ),
    ]
