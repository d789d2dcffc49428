from abc import ABC, abstractmethod
from flask import current_app
from extensions import db
from models.notification import Notification

class NotificationChannel(ABC):
    @abstractmethod
    def send(self, notification):
        pass

class InAppChannel(NotificationChannel):
    """Stores the notification so the app can show it on next refresh."""

    def send(self, notification):
        db.session.add(notification)
        db.session.commit()
        return True

class LogChannel(NotificationChannel):
    def send(self, notification):
        current_app.logger.info(f'Notification for user {notification.user_id}: {notification.title} - {notification.body}')
        return True

class NotificationDispatcher:
    def __init__(self, channels=None):
        self.channels = channels or {
            'in_app': InAppChannel(),
            'log': LogChannel()
        }

    def dispatch(self, user_id, category, title, body, extra_data=None, channel_preference='all'):
        notification = Notification(
            user_id=user_id,
            category=category,
            title=title,
            body=body,
            extra_data=extra_data
        )

        if channel_preference == 'all':
            results = {}
            for channel_name, channel in self.channels.items():
                results[channel_name] = channel.send(notification)
            return all(results.values())

        channel = self.channels.get(channel_preference)
        if channel:
            return channel.send(notification)

        return False
