"""Exercise the JSON formatter against a live Ollama model.

Runs three requests (single object, nested list, plain text) and one
streamed request with an uppercasing formatter:
    python -m scripts.try_formatter [model]

Needs an Ollama server at OLLAMA_BASE_URL (default http://localhost:11434)
with the model pulled. Set LOG_FORMAT=pretty for readable logs.
"""

import asyncio
import sys

from pydantic import BaseModel

from modelbridge import GenerationOptions, LLMInvocationError, ModelRegistry, Settings
from modelbridge.utils.logging import configure_logging, get_logger, log

MODULE = "try_formatter"
logger = get_logger("scripts")


class WeatherData(BaseModel):
    temperature: float
    conditions: str
    location: str


class CityWeather(BaseModel):
    city: str
    temperature: float
    conditions: str


class MultipleCitiesWeather(BaseModel):
    cities: list[CityWeather]


async def run(model_name: str) -> None:
    registry = ModelRegistry(Settings.from_env())
    model = registry.get_or_create("ollama", model_name)

    try:
        weather = await model.generate(
            "Give me the weather in Paris. For temperature, write 9 for 9°C, 10 for 10°C, etc.",
            GenerationOptions(
                temperature=0.7,
                system_prompt="You are a weather reporter. Write in Spanish.",
                output_schema=WeatherData,
            ),
        )
        log.info(logger, MODULE, "single_city_done", "Single city response",
                 model=weather.model, **weather.content.model_dump())

        cities = await model.generate(
            "Give me the current weather for Paris, Lyon, and Marseille. "
            "For temperature, write 9 for 9°C, 10 for 10°C, etc.",
            GenerationOptions(temperature=0.7, output_schema=MultipleCitiesWeather),
        )
        for city in cities.content.cities:
            log.info(logger, MODULE, "city_done", city.city,
                     temperature=city.temperature, conditions=city.conditions)

        poem = await model.generate(
            "Describe the current weather in Nice, France in a poetic way.",
            GenerationOptions(
                temperature=0.7,
                system_prompt="You are a poetic weather reporter. Write in French.",
            ),
        )
        log.info(logger, MODULE, "text_done", "Poetic weather description",
                 content=poem.content)
    except LLMInvocationError as e:
        log.error(logger, MODULE, "generate_failed", "Generation failed",
                  error=str(e), attempts=e.attempts)
        return

    async for chunk in model.stream_generate(
        "Tell me a short story.",
        GenerationOptions(temperature=0.7, system_prompt="in french.", formatter=str.upper),
    ):
        sys.stdout.write(chunk.content or "")
        sys.stdout.flush()
    sys.stdout.write("\n")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(run(sys.argv[1] if len(sys.argv) > 1 else "mistral"))
