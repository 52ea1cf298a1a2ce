from csm_publish.main import run

run()
