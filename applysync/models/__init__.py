# Every stored document type lives here so the store layer has one import point.

from applysync.models.subscriber import Subscriber          # noqa: F401
