"""
Сервис для работы с OpenAI API (AI-тренер)
"""
from openai import OpenAI
from typing import List, Dict, Optional, Any
import logging
import json

from src.config import OPENAI_MODEL

logger = logging.getLogger(__name__)

COACH_SYSTEM_PROMPTS = {
    "workout": (
        "You are a Filipino fitness coach. Provide concise, safe, and culturally relevant "
        "workout plan suggestions based on the user profile. Use bullet points."
    ),
    "meal": (
        "You are a Filipino nutrition coach. Provide concise, safe, and culturally relevant "
        "daily meal plan suggestions based on the user profile and context. Use bullet points."
    ),
}

REVIEW_SYSTEM_PROMPT = (
    "You are a Filipino fitness and nutrition coach. Provide a monthly review in a friendly, "
    "motivating tone. Be practical and safe; avoid medical claims. "
    "Keep suggestions culturally relevant for the Philippines."
)

REVIEW_SCHEMA = """Return strict JSON with the following shape:
{
  "assessment": string,
  "adjustments": {"workout": string[], "meal": string[]},
  "next_month_goals": {
    "weekly_workouts": number,
    "target_calories": number | null,
    "focus_muscle_groups": string[],
    "habits": string[]
  }
}"""


class OpenAIService:
    """AI-тренер по тренировкам и питанию на базе ChatGPT"""

    def __init__(self, api_key: str, model: str = OPENAI_MODEL):
        self.client = OpenAI(api_key=api_key)
        self.model = model
        logger.info(f"OpenAI клиент инициализирован (модель {model})")

    async def suggest(self, kind: str, profile: Dict[str, Any], context: Optional[Dict[str, Any]] = None) -> str:
        """
        Советы по программе тренировок или питанию

        Args:
            kind: 'workout' или 'meal'
            profile: данные профиля пользователя
            context: дополнительный контекст (план, климат, график работы)

        Returns:
            Текст с 4-6 советами
        """
        if kind not in COACH_SYSTEM_PROMPTS:
            raise ValueError(f"Неизвестный тип советов: {kind}")

        user_prompt = json.dumps({"profile": profile, "context": context, "type": kind}, ensure_ascii=False, default=str)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": COACH_SYSTEM_PROMPTS[kind]},
                    {
                        "role": "user",
                        "content": "Generate 4-6 practical suggestions tailored to the user. "
                                   "Avoid medical claims. Keep to 120-200 words total. Input: " + user_prompt
                    }
                ],
                temperature=0.7
            )

            suggestions = response.choices[0].message.content or "No suggestions available."
            logger.info(f"Советы ({kind}) сгенерированы")
            return suggestions

        except Exception as e:
            logger.error(f"Ошибка генерации советов ({kind}): {e}")
            raise

    async def monthly_review(
        self,
        profile: Dict[str, Any],
        workout_summary: Dict[str, Any],
        nutrition: Optional[Dict[str, Any]] = None,
        month: Optional[str] = None
    ) -> Dict:
        """
        Обзор месяца: оценка, корректировки и цели на следующий месяц
        """
        user_content = {
            "month": month,
            "profile": profile,
            "workoutSummary": workout_summary,
            "nutrition": nutrition,
            "request": "Assess last month and propose adjustments and targets for next month."
        }

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": REVIEW_SYSTEM_PROMPT},
                    {"role": "user", "content": f"{REVIEW_SCHEMA}\nInput: {json.dumps(user_content, ensure_ascii=False, default=str)}."}
                ],
                temperature=0.4,
                response_format={"type": "json_object"}
            )
        except Exception as e:
            logger.error(f"Ошибка генерации обзора месяца: {e}")
            raise

        content = response.choices[0].message.content or "{}"
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            logger.error("Обзор месяца вернулся не в формате JSON")
            return {"assessment": content}

    async def general_chat(self, user_message: str, context: Optional[List[Dict]] = None) -> str:
        """
        Общение с AI-тренером
        """
        messages = [
            {
                "role": "system",
                "content": "You are a friendly Filipino fitness and nutrition coach. Give practical, safe advice "
                           "on workouts and local food. Avoid medical claims."
            }
        ]

        if context:
            messages.extend(context)

        messages.append({"role": "user", "content": user_message})

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=0.8,
                max_tokens=1000
            )

            return response.choices[0].message.content

        except Exception as e:
            logger.error(f"Ошибка общения с AI: {e}")
            raise
