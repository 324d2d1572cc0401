"""Default first-run guide catalog."""

from aidguide.schemas.guide import GuideFields

DEFAULT_GUIDES: tuple[GuideFields, ...] = (
    GuideFields(
        title="Burns",
        content=(
            "1. Cool the area with clean running water for 10 minutes.\n"
            "2. Do not burst blisters.\n"
            "3. Cover with a clean cloth.\n"
            "4. Call 105 if the burn is serious."
        ),
        image_path="assets/images/quemadura.png",
    ),
    GuideFields(
        title="Fractures",
        content=(
            "1. Immobilize the injured area.\n"
            "2. Do not try to realign the bone.\n"
            "3. Apply wrapped ice.\n"
            "4. Call 105."
        ),
        image_path="assets/images/fractura.png",
    ),
    GuideFields(
        title="Choking",
        content=(
            "1. Encourage the person to cough.\n"
            "2. If they cannot breathe, perform the Heimlich maneuver.\n"
            "3. Call 105 if there is no improvement."
        ),
        image_path="assets/images/atragantamiento.png",
    ),
    GuideFields(
        title="CPR",
        content=(
            "1. Check for breathing.\n"
            "2. Give 30 chest compressions and 2 rescue breaths.\n"
            "3. Keep the rhythm until help arrives."
        ),
        image_path="assets/images/rcp.png",
    ),
    GuideFields(
        title="Cuts & Bleeding",
        content=(
            "1. Apply direct pressure with clean gauze.\n"
            "2. Do not remove embedded objects.\n"
            "3. Call 105 if the bleeding is heavy."
        ),
        image_path="assets/images/cortes.png",
    ),
    GuideFields(
        title="Fainting",
        content=(
            "1. Lay the person down and raise their legs.\n"
            "2. Loosen tight clothing.\n"
            "3. If they do not wake within 1 minute, call 105."
        ),
        image_path="assets/images/desmayo.png",
    ),
    GuideFields(
        title="Bites & Stings",
        content=(
            "1. Wash the area.\n"
            "2. Apply ice.\n"
            "3. Call 105 if there is a severe reaction."
        ),
        image_path="assets/images/picadura.png",
    ),
    GuideFields(
        title="Hypothermia",
        content=(
            "1. Move the person somewhere warm.\n"
            "2. Cover them with blankets.\n"
            "3. Do not apply direct heat.\n"
            "4. Call 105."
        ),
        image_path="assets/images/hipotermia.png",
    ),
    GuideFields(
        title="Poisoning",
        content=(
            "1. Do not induce vomiting.\n"
            "2. Identify the substance.\n"
            "3. Call 105 or go to the emergency room."
        ),
        image_path="assets/images/intoxicacion.png",
    ),
)
