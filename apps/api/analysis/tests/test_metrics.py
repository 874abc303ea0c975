from analysis.metrics import calculate_basic_metrics, count_sentences, count_words


def test_metrics_for_regular_text():
    sentence = "one two three four five six seven eight nine ten eleven twelve thirteen fourteen fifteen sixteen seventeen eighteen nineteen twenty."
    text = " ".join([sentence] * 20)

    metrics = calculate_basic_metrics(text)

    assert metrics.word_count == 400
    assert metrics.sentence_count == 20
    assert metrics.reading_time_minutes == 2
    assert metrics.average_sentence_length == 20


def test_reading_time_rounds_up():
    assert calculate_basic_metrics("word " * 201).reading_time_minutes == 2
    assert calculate_basic_metrics("word").reading_time_minutes == 1


def test_empty_text_has_zero_metrics():
    metrics = calculate_basic_metrics("")
    assert metrics.word_count == 0
    assert metrics.sentence_count == 0
    assert metrics.reading_time_minutes == 0
    assert metrics.average_sentence_length == 0.0


def test_punctuation_runs_count_once():
    assert count_sentences("Wait... what?! Really.") == 3
    assert count_sentences("No terminal punctuation") == 1
    assert count_words("  spaced   out\nwords ") == 3
